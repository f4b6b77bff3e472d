from tqdm import tqdm
import os

import logging
log = logging.getLogger(__name__)


class RuntimeConfiguration(object):
    """
    Global runtime configuration. Allows for the dynamic configuration of substitution box tables and progress reporting.
    """

    def __init__(self, sbox_path: str=None, enable_progress: bool=True):
        self.primitives      = []
        self.sbox_path       = sbox_path
        self.enable_progress = enable_progress
        self._sboxes         = None


    def __repr__(self):
        return f"<RuntimeConfiguration: sbox_path={self.sbox_path!r}, enable_progress={self.enable_progress}, primitives={len(self.primitives)}>"


    @staticmethod
    def from_environment() -> 'RuntimeConfiguration':
        return RuntimeConfiguration(
            sbox_path=os.environ.get('DRAGON_SBOX_PATH') or None,
            enable_progress=os.environ.get('DRAGON_PROGRESS', '1') != '0'
        )


    @property
    def sboxes(self) -> 'DragonSBoxes':
        """
        Substitution boxes used when a cipher is constructed without explicit tables. Loaded from `sbox_path` on first use.
        """
        if self._sboxes is None:
            from dragon.stream_ciphers.dragon_sboxes import DragonSBoxes
            from dragon.utilities.exceptions import MissingSBoxesException

            if not self.sbox_path:
                raise MissingSBoxesException("No substitution boxes configured; pass `sboxes` or set DRAGON_SBOX_PATH")

            log.debug(f"Loading substitution boxes from {self.sbox_path}")
            self._sboxes = DragonSBoxes.load(self.sbox_path)

        return self._sboxes


    @sboxes.setter
    def sboxes(self, sboxes: 'DragonSBoxes'):
        self._sboxes = sboxes


    def register_primitive(self, primitive: type):
        self.primitives.append(primitive)


    def search_primitives(self, name: str) -> list:
        return [prim for prim in self.primitives if prim.__name__.lower() == name.lower()]


    def report_progress(self, iterable, **kwargs):
        if self.enable_progress:
            return tqdm(iterable, **kwargs)
        else:
            return iterable



RUNTIME = RuntimeConfiguration.from_environment()
