"""Boardkeeper - keeps a GitLab issue board and standup wiki self-consistent."""

__version__ = "0.1.0"
