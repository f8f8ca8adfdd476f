# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Package version (also sent to the API as the client version tag)."""

__version__ = "1.3.072"
