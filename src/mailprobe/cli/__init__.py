# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Command line interface; the entrypoint is `mailprobe.cli.main:main`."""
