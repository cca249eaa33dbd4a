# -*- coding: utf-8 -*-
"""NodePerson wellness: guided breathing sessions and progress tracking."""
