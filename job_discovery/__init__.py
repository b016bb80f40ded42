"""Job discovery: feed ingestion with content dedup, and TF-IDF relevance ranking."""
from job_discovery.models import Job, JobQuery, JobSource, RankedJob, RankingWeights, Salary, SalaryPeriod

__all__ = [
    "Job", "JobQuery", "JobSource", "RankedJob", "RankingWeights",
    "Salary", "SalaryPeriod",
]
