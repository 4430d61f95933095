"""Retention tier classification and expiration math."""

from datetime import datetime, timedelta
from typing import Dict

from ..config import RetentionConfig
from .models import RetentionPolicy

SUNDAY = 6


class RetentionPolicyEngine:
    """Assign retention tiers to backup dates and compute their expiration.

    Tiers are checked in precedence order: January 1st is yearly, the 1st of
    any other month is monthly, a Sunday is weekly, anything else is daily.
    """

    def __init__(self, config: RetentionConfig):
        self.config = config

    def classify(self, when: datetime) -> RetentionPolicy:
        if when.day == 1 and when.month == 1:
            return RetentionPolicy.YEARLY
        if when.day == 1:
            return RetentionPolicy.MONTHLY
        if when.weekday() == SUNDAY:
            return RetentionPolicy.WEEKLY
        return RetentionPolicy.DAILY

    def retention_days(self) -> Dict[RetentionPolicy, int]:
        return {
            RetentionPolicy.DAILY: self.config.daily_days,
            RetentionPolicy.WEEKLY: self.config.weekly_weeks * 7,
            RetentionPolicy.MONTHLY: self.config.monthly_months * 30,
            RetentionPolicy.YEARLY: self.config.yearly_years * 365,
        }

    def expiration_for(self, policy: RetentionPolicy, created_at: datetime) -> datetime:
        """Return ``created_at`` plus the configured day count for ``policy``."""
        return created_at + timedelta(days=self.retention_days()[RetentionPolicy(policy)])
