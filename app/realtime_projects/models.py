from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Union
from enum import Enum

# ==================== ENUMS ====================

class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

# Rank used by the difficulty sort, unknown values go last
DIFFICULTY_RANK = {
    Difficulty.BEGINNER.value: 1,
    Difficulty.INTERMEDIATE.value: 2,
    Difficulty.ADVANCED.value: 3,
}

class ProjectSort(str, Enum):
    NAME = "name"
    DIFFICULTY = "difficulty"
    NEWEST = "newest"
    OLDEST = "oldest"

# ==================== PROJECT MODELS ====================

class ProjectDescriptor(BaseModel):
    """
    One discovered project folder. Built from the folder name, filesystem
    dates and the optional project.json; never stored.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    folder_name: str = Field(alias="folderName")
    name: str
    description: str
    category: str
    difficulty: str
    thumbnail: Optional[str] = None
    tags: List[str] = []
    estimated_hours: Union[int, float] = Field(alias="estimatedHours")
    order: Union[int, float]
    version: str
    # YYYY-MM-DD, so the newest/oldest sorts can compare them as text
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")
    hide_footer: bool = Field(default=False, alias="hideFooter")
    hide_header: bool = Field(default=False, alias="hideHeader")
    path: str

    # set when order came from project.json, drives sorting only
    has_explicit_order: bool = Field(default=False, exclude=True)

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True)

class ProjectStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int
    by_category: Dict[str, int] = Field(default_factory=dict, alias="byCategory")
    by_difficulty: Dict[str, int] = Field(default_factory=dict, alias="byDifficulty")
