# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Field constraint validation.

  - kinds: the closed set of constraint kinds
  - constraints: declaring kinds on schema classes (@constrained, builder)
  - violations: Violation and ValidationResult values
  - validator: check() and validate()
"""
