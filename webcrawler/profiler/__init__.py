"""
Wall-clock profiling of marked methods.
"""

from .profiler import Profiler, ProfilingState, profiled

__all__ = ['Profiler', 'ProfilingState', 'profiled']
