"""archsetup: reproducible Arch / Chaotic-AUR / Flatpak deployer.

Core design goals:
- Declarative package lists are the source of truth
- Idempotent steps, safe to re-run
- Every external tool behind a small capability class
- Centralized logging
"""

__all__ = []
