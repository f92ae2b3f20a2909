"""Diagnostics for generated populations."""

from .calibration import CalibrationChecker, print_calibration_summary

__all__ = ['CalibrationChecker', 'print_calibration_summary']
