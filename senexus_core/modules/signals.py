"""
Module System Signals

Django signals for module lifecycle events. Senders are ``FirmModule``;
receivers get ``firm``, ``module`` and ``user`` keyword arguments.
"""

from django.dispatch import Signal

module_enabled = Signal()     # When a module is enabled for a firm
module_disabled = Signal()    # When a module is disabled for a firm
module_configured = Signal()  # When a firm's module configuration changes (also gets ``configuration``)
