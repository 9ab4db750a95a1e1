"""
Firm Signals
"""

from django.dispatch import Signal

firm_created = Signal()  # After a firm and its modules are committed; gets ``firm``, ``modules`` and ``user``
