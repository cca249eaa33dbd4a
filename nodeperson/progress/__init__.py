# -*- coding: utf-8 -*-
"""Progress domain (daily progress, streaks, session history).

Records are written through on every finished session; see storage.py.
"""
