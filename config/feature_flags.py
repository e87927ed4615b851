"""
Feature Flag Configuration

Runtime switches for the query pipeline and the chat API.
"""

import os
from typing import Optional
from dataclasses import dataclass


@dataclass
class FeatureFlags:
    """Feature flag configuration"""

    # Read every data set with a single batchGet call when all of them are needed
    prefer_batch_read: bool = True

    # Log per-stage timings after each pipeline run
    log_stage_timings: bool = True

    # Return the assembled context bundle in /api/chat responses (debugging)
    include_bundle_in_response: bool = False


# Global feature flags instance
_feature_flags: Optional[FeatureFlags] = None


def get_feature_flags() -> FeatureFlags:
    """Get or create feature flags singleton"""
    global _feature_flags

    if _feature_flags is None:
        _feature_flags = FeatureFlags(
            # Load from environment
            prefer_batch_read=os.environ.get("PREFER_BATCH_READ", "true").lower() == "true",
            log_stage_timings=os.environ.get("LOG_STAGE_TIMINGS", "true").lower() == "true",
            include_bundle_in_response=os.environ.get("INCLUDE_BUNDLE_IN_RESPONSE", "false").lower() == "true",
        )

    return _feature_flags


def set_feature_flags(flags: FeatureFlags):
    """Set feature flags (for testing)"""
    global _feature_flags
    _feature_flags = flags
