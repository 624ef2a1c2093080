# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Shared numeric constants."""

MILLIS_PER_SECOND = 1000
BYTES_PER_KIB = 1024
BYTES_PER_MIB = 1024 * 1024
BYTES_PER_GIB = 1024 * 1024 * 1024

NOT_AVAILABLE = "N/A"
"""Placeholder used in reports for values that were not produced."""

DEFAULT_HOST = "127.0.0.1"
