from .angles import AngleMapper
from .finger import LinkChain, LinkPose
from .hand import HandAssembly, concatenate_pieces

__all__ = [
    "AngleMapper",
    "LinkChain",
    "LinkPose",
    "HandAssembly",
    "concatenate_pieces",
]
