# Copyright 2025 CEA
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""
Exceptions Module
=================

Custom exceptions raised by the Hephaistos drivers. All of them derive from
Error so that the application entry points can report them with a
descriptive message before aborting.
"""


class Error(Exception):
    """Base class for exceptions in Hephaistos."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ConfigurationError(Error):
    """Invalid simulation parameters (extents, counts, names, paths)."""


class DataError(Error):
    """Malformed input data (grain raster, orientation table)."""


class DimensionMismatchError(DataError):
    """A boundary value function returned the wrong number of components.

    Attributes
    ----------
    found : int Number of components returned
    expected : int Number of components required by the displacement field
    """

    def __init__(self, found, expected):
        super().__init__(f"Dimension mismatch: boundary value function returned "
                         f"{found} components, expected {expected}")
        self.found = found
        self.expected = expected


class OutOfDomainError(DataError):
    """An orientation lookup fell outside the voxelized domain."""


class IterationError(Error):
    """An increment did not converge within the allowed number of iterations."""
