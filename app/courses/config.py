"""
Course System Configuration
Chapter classification and gating settings
"""

# Chapters whose title contains any of these (case-insensitive) are
# assessments and stay hidden until every regular chapter is completed
ASSESSMENT_KEYWORDS = ("assignment", "test", "exam", "final")

# Policy for a course with no regular chapters: assessments stay locked
UNLOCK_WHEN_NO_REGULAR_CHAPTERS = False
