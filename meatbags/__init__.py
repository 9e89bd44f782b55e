"""Laser range finder people tracking: SCIP sensor protocol, clustering, blob tracking, filters and OSC output."""

__version__ = "0.1.0"