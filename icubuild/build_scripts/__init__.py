#
# Copyright 2024 zhlinh and icubuild Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""Build steps for the ICU4C static libraries."""

__all__ = [
    "build_config",
    "build_icu",
    "build_targets",
    "build_utils",
    "collect_libs",
    "prepare_source",
]
