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
Top-level exit handling for the application scripts.

Any failure raised while setting up or running a simulation is fatal: the
description is printed between separator lines and the process exits with a
non-zero status.
"""

import sys
from .errors import Error

SEPARATOR = "----------------------------------------------------"


def _report(lines):
    stream = sys.stderr
    stream.write("\n\n" + SEPARATOR + "\n")
    for line in lines:
        stream.write(line + "\n")
    stream.write(SEPARATOR + "\n")
    stream.flush()


def run_main(main, *args, **kwargs):
    """
    Run an application entry point and translate failures into an exit code.

    Parameters
    ----------
    main : callable Entry point of the application
    *args, **kwargs : forwarded to main

    Returns
    -------
    int 0 on success, 1 on any failure
    """
    try:
        main(*args, **kwargs)
    except Error as exc:
        _report(["Exception on processing: ", exc.message, "Aborting!"])
        return 1
    except Exception as exc:
        _report(["Unknown exception!", repr(exc), "Aborting!"])
        return 1
    return 0
