"""
Per-module configuration types.

Each module kind with a known schema has its own configuration record,
selected by module slug. Payloads are validated with a DRF serializer per
kind before the record is built. Modules without a schema use
``GenericModuleConfig``, which stores an arbitrary JSON object.

Stored configuration is always the ``to_dict()`` form of one of these
records, merged over the kind's defaults.
"""

import logging
from dataclasses import dataclass, field, asdict
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Type

from rest_framework import serializers

from .exceptions import ModuleConfigurationError

logger = logging.getLogger(__name__)


CONTRACT_TYPES = ('CDI', 'CDD', 'Stage', 'Prestataire')


class BaseConfigurationSerializer(serializers.Serializer):
    """
    Base serializer for module configuration payloads.

    Every field is optional; omitted settings keep their defaults.
    Keys the schema does not declare are rejected.
    """

    def to_internal_value(self, data):
        if isinstance(data, Mapping):
            unknown = sorted(set(data) - set(self.fields))
            if unknown:
                raise serializers.ValidationError({
                    key: ['Unknown setting.'] for key in unknown
                })
        return super().to_internal_value(data)


class HRConfigurationSerializer(BaseConfigurationSerializer):
    auto_generate_employee_numbers = serializers.BooleanField(required=False)
    default_contract_type = serializers.ChoiceField(choices=CONTRACT_TYPES, required=False)
    probation_period_days = serializers.IntegerField(min_value=0, required=False)
    notice_period_days = serializers.IntegerField(min_value=0, required=False)
    working_hours_per_week = serializers.IntegerField(min_value=0, required=False)
    annual_leave_days = serializers.IntegerField(min_value=0, required=False)
    sick_leave_tracking = serializers.BooleanField(required=False)
    contract_renewal_alerts = serializers.BooleanField(required=False)
    contract_expiry_warning_days = serializers.ListField(
        child=serializers.IntegerField(min_value=0),
        required=False
    )


class HealthInsuranceConfigurationSerializer(BaseConfigurationSerializer):
    coverage_types = serializers.ListField(child=serializers.CharField(), required=False)
    claim_approval_workflow = serializers.BooleanField(required=False)
    auto_reimbursement_limit = serializers.FloatField(min_value=0, required=False)
    provider_network_required = serializers.BooleanField(required=False)
    family_coverage_enabled = serializers.BooleanField(required=False)
    copayment_percentages = serializers.DictField(
        child=serializers.FloatField(min_value=0, max_value=100),
        required=False
    )


class FinanceConfigurationSerializer(BaseConfigurationSerializer):
    default_currency = serializers.CharField(min_length=3, max_length=3, required=False)
    tax_rates = serializers.DictField(child=serializers.FloatField(min_value=0), required=False)
    invoice_numbering_format = serializers.CharField(required=False)
    payment_terms_days = serializers.IntegerField(min_value=0, required=False)
    late_payment_interest_rate = serializers.FloatField(min_value=0, required=False)
    multi_currency_enabled = serializers.BooleanField(required=False)

    def validate_default_currency(self, value):
        if not value.isalpha():
            raise serializers.ValidationError('Must be an ISO 4217 code.')
        return value.upper()


class CRMConfigurationSerializer(BaseConfigurationSerializer):
    lead_stages = serializers.ListField(
        child=serializers.CharField(),
        allow_empty=False,
        required=False
    )
    sales_pipeline_enabled = serializers.BooleanField(required=False)
    auto_follow_up_days = serializers.IntegerField(min_value=0, required=False)
    email_integration_enabled = serializers.BooleanField(required=False)
    sms_notifications_enabled = serializers.BooleanField(required=False)


def _first_message(messages: Any) -> str:
    if isinstance(messages, dict):
        return _first_message(next(iter(messages.values())))
    if isinstance(messages, list):
        return _first_message(messages[0])
    return str(messages)


@dataclass
class ModuleConfig:
    """Base class for typed module configurations."""
    kind: ClassVar[str] = ''
    serializer_class: ClassVar[Type[serializers.Serializer]] = BaseConfigurationSerializer

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'ModuleConfig':
        """
        Build a configuration from ``data`` merged over the defaults.

        Raises:
            ModuleConfigurationError: On unknown keys or invalid values
        """
        serializer = cls.serializer_class(data=dict(data or {}))
        if not serializer.is_valid():
            errors = serializer.errors
            message = '; '.join(
                f"{name}: {_first_message(messages)}" for name, messages in errors.items()
            )
            raise ModuleConfigurationError(
                f"Invalid configuration for {cls.kind}: {message}",
                errors=errors,
            )
        return cls(**serializer.validated_data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def features(self) -> Dict[str, bool]:
        """Feature flags derived from the configuration."""
        return {}


@dataclass
class HRModuleConfig(ModuleConfig):
    kind: ClassVar[str] = 'hr'
    serializer_class: ClassVar[Type[serializers.Serializer]] = HRConfigurationSerializer

    auto_generate_employee_numbers: bool = True
    default_contract_type: str = 'CDI'
    probation_period_days: int = 90
    notice_period_days: int = 30
    working_hours_per_week: int = 35
    annual_leave_days: int = 25
    sick_leave_tracking: bool = True
    contract_renewal_alerts: bool = True
    contract_expiry_warning_days: List[int] = field(default_factory=lambda: [90, 60, 30, 15])

    def features(self) -> Dict[str, bool]:
        return {
            'auto_employee_numbers': self.auto_generate_employee_numbers,
            'contract_alerts': self.contract_renewal_alerts,
            'sick_leave_tracking': self.sick_leave_tracking,
        }


@dataclass
class HealthInsuranceModuleConfig(ModuleConfig):
    kind: ClassVar[str] = 'health_insurance'
    serializer_class: ClassVar[Type[serializers.Serializer]] = HealthInsuranceConfigurationSerializer

    coverage_types: List[str] = field(
        default_factory=lambda: ['Base', 'Supplementary', 'Dental', 'Optical']
    )
    claim_approval_workflow: bool = True
    auto_reimbursement_limit: float = 100
    provider_network_required: bool = False
    family_coverage_enabled: bool = True
    copayment_percentages: Dict[str, float] = field(default_factory=lambda: {
        'consultation': 70,
        'medication': 80,
        'hospitalization': 90,
        'dental': 60,
        'optical': 50,
    })

    def features(self) -> Dict[str, bool]:
        return {
            'family_coverage': self.family_coverage_enabled,
            'provider_network': self.provider_network_required,
            'claim_workflow': self.claim_approval_workflow,
        }


@dataclass
class FinanceModuleConfig(ModuleConfig):
    kind: ClassVar[str] = 'finance'
    serializer_class: ClassVar[Type[serializers.Serializer]] = FinanceConfigurationSerializer

    default_currency: str = 'EUR'
    tax_rates: Dict[str, float] = field(default_factory=lambda: {'VAT': 20, 'VAT_reduced': 10})
    invoice_numbering_format: str = 'INV-{YYYY}-{###}'
    payment_terms_days: int = 30
    late_payment_interest_rate: float = 0.03
    multi_currency_enabled: bool = False


@dataclass
class CRMModuleConfig(ModuleConfig):
    kind: ClassVar[str] = 'crm'
    serializer_class: ClassVar[Type[serializers.Serializer]] = CRMConfigurationSerializer

    lead_stages: List[str] = field(
        default_factory=lambda: ['Prospect', 'Qualified', 'Proposal', 'Negotiation', 'Won', 'Lost']
    )
    sales_pipeline_enabled: bool = True
    auto_follow_up_days: int = 7
    email_integration_enabled: bool = True
    sms_notifications_enabled: bool = False


@dataclass
class GenericModuleConfig(ModuleConfig):
    """Configuration for modules without a declared schema."""
    kind: ClassVar[str] = 'generic'

    values: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'GenericModuleConfig':
        return cls(values=dict(data or {}))

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.values)


CONFIG_TYPES: Dict[str, Type[ModuleConfig]] = {
    config_type.kind: config_type
    for config_type in (
        HRModuleConfig,
        HealthInsuranceModuleConfig,
        FinanceModuleConfig,
        CRMModuleConfig,
    )
}


def config_type_for(slug: str) -> Type[ModuleConfig]:
    return CONFIG_TYPES.get(slug, GenericModuleConfig)


def default_config(slug: str) -> ModuleConfig:
    """Default configuration for the module with ``slug``."""
    return config_type_for(slug)()


def parse_config(slug: str, data: Any) -> ModuleConfig:
    """
    Validate user-supplied configuration for a module.

    Raises:
        ModuleConfigurationError: If ``data`` does not fit the module's schema
    """
    if data is not None and not isinstance(data, Mapping):
        raise ModuleConfigurationError("Configuration must be a JSON object")
    return config_type_for(slug).from_dict(data)


def load_config(slug: str, stored: Any) -> ModuleConfig:
    """
    Read a stored configuration, falling back to defaults when the stored
    value no longer fits the schema (e.g. written before a field was renamed).
    """
    try:
        return parse_config(slug, stored)
    except ModuleConfigurationError as e:
        logger.warning(f"Stored configuration for {slug} is invalid, using defaults: {e}")
        return default_config(slug)
