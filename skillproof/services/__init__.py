from .verification_service import CollectionOutcome, SkillVerificationService

__all__ = ["CollectionOutcome", "SkillVerificationService"]
