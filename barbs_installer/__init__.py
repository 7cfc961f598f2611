"""BARBS: Beach Automation Routine for Building Systems.

Bootstraps an Arch or Artix desktop for one user:
- Creates the user and their source checkout directory
- Installs programs from a CSV manifest through pacman, the AUR, git+make or pip
- Deploys a dotfiles repository
- Applies pacman, sudo, touchpad, beep and D-Bus tweaks

Steps are idempotent and the run state is persisted, so a run can be resumed.
"""

__all__ = []
