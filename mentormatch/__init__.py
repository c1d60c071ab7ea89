"""
mentormatch: semantic student-to-mentor recommendation.

Typical use:

    from mentormatch.config import Settings
    from mentormatch.recommendation import RecommendationGenerator

    generator = RecommendationGenerator.from_settings(Settings.from_env())
    records = generator.get_or_generate_recommendations(student_id)
"""

__version__ = "0.1.0"
