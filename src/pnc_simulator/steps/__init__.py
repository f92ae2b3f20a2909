"""Propagation step implementations."""

from .continuous import ContinuousStep
from .categorical import CategoricalStep
from .binary import BinaryStep
from .composite import CompositeStep

STEP_TYPES = {
    ContinuousStep.kind: ContinuousStep,
    CategoricalStep.kind: CategoricalStep,
    BinaryStep.kind: BinaryStep,
    CompositeStep.kind: CompositeStep,
}

__all__ = ['ContinuousStep', 'CategoricalStep', 'BinaryStep', 'CompositeStep', 'STEP_TYPES']
