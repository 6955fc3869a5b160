from .base import BaseService
from .classifier import InterviewClassifier
from .block_creator import BlockCreator
from .block_reclaimer import BlockReclaimer
from .jobs import run_block_creator, run_block_reclaimer, build_gateway, utcnow

__all__ = [
    "BaseService",
    "InterviewClassifier",
    "BlockCreator",
    "BlockReclaimer",
    "run_block_creator",
    "run_block_reclaimer",
    "build_gateway",
    "utcnow",
]
