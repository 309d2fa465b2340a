"""Shared helpers: logging setup, id generation and shuffling."""

# Tourney Pairing
# Copyright (C) 2025  Tourney Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import logging
import os
import random
import string
from typing import Collection, MutableSequence, Optional

from tourneypairing.constants import ID_LENGTH, LOG_LEVEL_ENV_VAR
from tourneypairing.type_hints import IdGenerator

ID_ALPHABET = string.ascii_letters + string.digits

# Library use stays silent unless the application configures logging
logging.getLogger("tourneypairing").addHandler(logging.NullHandler())

# Give up after this many collisions, something is wrong with the generator
MAX_ID_ATTEMPTS = 1000


def setup_logger(name: str) -> logging.Logger:
    """Return the module logger, honouring the package log level variable.

    Handlers are left to the application.
    """
    logger = logging.getLogger(name)
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR)
    if level_name:
        level = logging.getLevelName(level_name.upper())
        if isinstance(level, int):
            logger.setLevel(level)
    return logger


def random_string(length: int = ID_LENGTH) -> str:
    """Create a random alphanumeric string."""
    return "".join(random.choice(ID_ALPHABET) for _ in range(length))


def generate_unique_id(
    existing: Collection[str],
    length: int = ID_LENGTH,
    generator: Optional[IdGenerator] = None,
) -> str:
    """Generate an id not present in ``existing``, retrying on collision.

    Args:
        existing: Ids already in use
        length: Length passed to the generator
        generator: Id source, defaults to :func:`random_string`

    Returns:
        A fresh id

    Raises:
        RuntimeError: If the generator keeps producing taken ids
    """
    generator = generator or random_string
    for _ in range(MAX_ID_ATTEMPTS):
        new_id = generator(length)
        if new_id not in existing:
            return new_id
    raise RuntimeError(
        f"Id generator produced {MAX_ID_ATTEMPTS} colliding ids in a row"
    )


def shuffle(sequence: MutableSequence) -> None:
    """Shuffle a sequence in place (uniform random permutation)."""
    random.shuffle(sequence)
