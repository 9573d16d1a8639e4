"""vetclinic — record keeping for a veterinary clinic."""

__version__ = "0.1.0"
