from .dragon import Dragon
from .dragon_sboxes import DragonSBoxes
from .dragon_state import DragonState


__all__ = ["Dragon", "DragonSBoxes", "DragonState"]
