#!/usr/bin/env python3
"""
Filename utilities for generating output filenames.
"""

import os
import logging

logger = logging.getLogger(__name__)

MAX_NUMBERED_ATTEMPTS = 100


def _reserve(candidate: str) -> bool:
    """Create candidate exclusively. Returns False if it already exists."""
    try:
        with open(candidate, "x"):
            pass
        return True
    except FileExistsError:
        return False
    except OSError as e:
        logger.error(f"Cannot create file {candidate}: {e}")
        raise ValueError(f"Cannot create file: {e}")


def generate_output_filename(input_filename: str, extension: str = ".html") -> str:
    """
    Generates an output filename next to the input and reserves it by creating
    an empty file.

    Strategy:
    1. If input ends with .dat (case-insensitive), drop it
    2. Append " map" and the extension
    3. If that file exists, try " (1)", " (2)", etc. up to MAX_NUMBERED_ATTEMPTS
    4. Each candidate is opened exclusively (`open(path, 'x')`) so the name is
       reserved without races

    Args:
        input_filename: Path to the input position log
        extension: Extension of the output file, including the dot

    Returns:
        Output filename that has been created as an empty file

    Raises:
        RuntimeError: If every candidate name is taken
        ValueError: If a file cannot be created (permissions, invalid name)
    """
    input_dir = os.path.dirname(input_filename)
    input_base = os.path.basename(input_filename)

    if input_base.lower().endswith(".dat"):
        base_name = input_base[:-4]
    else:
        base_name = input_base

    base_output = os.path.join(input_dir, base_name + " map")

    candidate = base_output + extension
    if _reserve(candidate):
        return candidate

    for i in range(1, MAX_NUMBERED_ATTEMPTS + 1):
        candidate = f"{base_output} ({i}){extension}"
        if _reserve(candidate):
            return candidate

    logger.error(
        f"Could not find an available filename after {MAX_NUMBERED_ATTEMPTS} attempts. "
        f"Please clean up your output directory or pass an explicit output name."
    )
    raise RuntimeError(
        f"No available filename found after {MAX_NUMBERED_ATTEMPTS} attempts"
    )
