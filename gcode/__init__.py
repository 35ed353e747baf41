"""CNC program synthesis."""

from .synthesizer import GCodeProgram, GCodeSynthesizer, MachineSettings

__all__ = ['GCodeProgram', 'GCodeSynthesizer', 'MachineSettings']
