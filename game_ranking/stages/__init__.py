"""Pipeline stages: candidates, eligibility, scoring, diversity, sponsored, buckets, orchestrator."""

from .buckets import BucketOrganizer, create_bucket, merge_buckets
from .candidate_pool import CandidateGenerator, CandidateLimits, CandidateSource
from .diversity import DiversityPass, genre_stats
from .eligibility import EligibilityFilter
from .orchestrator import RecommendationEngine
from .ranking import ScoringEngine, get_badges
from .sponsored import SponsoredAllocator, injection_slots

__all__ = [
    "BucketOrganizer",
    "CandidateGenerator",
    "CandidateLimits",
    "CandidateSource",
    "DiversityPass",
    "EligibilityFilter",
    "RecommendationEngine",
    "ScoringEngine",
    "SponsoredAllocator",
    "create_bucket",
    "genre_stats",
    "get_badges",
    "injection_slots",
    "merge_buckets",
]
