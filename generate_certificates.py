#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Stamp participant names onto a PDF certificate template and pack the
results into a ZIP archive.
"""

import certificate_batch.cli


if __name__ == "__main__":
	certificate_batch.cli.main()
