"""Release train services.

- versions: tag parsing and next-version computation
- branches: train branch preconditions and resolution
- commits: conventional-commit classification and changelog rendering
- bump: per-package version and changelog file updates
- store: pending-release persistence and expiry
- push: push confirmation protocol
- service: the ``cut`` and ``push`` workflows
"""
