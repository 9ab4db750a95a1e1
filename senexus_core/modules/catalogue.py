"""
Default module catalogue.

Used by the ``seed_modules`` management command and by tests. Slugs
listed here must stay in sync with the ``CONFIG_TYPES`` mapping in
``configuration`` for modules that declare a configuration schema.
"""

CORE_MODULES = ['dashboard', 'settings']
BUSINESS_MODULES = ['hr', 'finance', 'procurement', 'projects']
HEALTH_MODULES = ['health_insurance', 'claims', 'providers']
COMMUNICATION_MODULES = ['crm', 'documents']
ANALYTICS_MODULES = ['reports', 'analytics']

CATEGORY_COLORS = {
    'core': '#6b7280',
    'business': '#3b82f6',
    'health': '#ef4444',
    'communication': '#f59e0b',
    'analytics': '#8b5cf6',
}

PRICING_TIER_COLORS = {
    'free': '#10b981',
    'basic': '#3b82f6',
    'premium': '#f59e0b',
    'enterprise': '#8b5cf6',
}

DEFAULT_CATALOGUE = [
    {
        'slug': 'dashboard',
        'display_name': 'Dashboard',
        'description': 'Firm overview and key indicators',
        'icon': 'layout-dashboard',
        'category': 'core',
        'is_core': True,
        'sort_order': 1,
    },
    {
        'slug': 'settings',
        'display_name': 'Settings',
        'description': 'Firm settings and module management',
        'icon': 'settings',
        'category': 'core',
        'is_core': True,
        'sort_order': 2,
    },
    {
        'slug': 'hr',
        'display_name': 'Human Resources',
        'description': 'Employees, contracts and leave',
        'icon': 'users',
        'category': 'business',
        'sort_order': 10,
    },
    {
        'slug': 'finance',
        'display_name': 'Finance',
        'description': 'Invoicing, payments and taxes',
        'icon': 'wallet',
        'category': 'business',
        'pricing_tier': 'basic',
        'sort_order': 11,
    },
    {
        'slug': 'procurement',
        'display_name': 'Procurement',
        'description': 'Suppliers and purchase orders',
        'icon': 'shopping-cart',
        'category': 'business',
        'pricing_tier': 'basic',
        'requires_modules': ['finance'],
        'sort_order': 12,
    },
    {
        'slug': 'projects',
        'display_name': 'Projects',
        'description': 'Project planning and tracking',
        'icon': 'kanban',
        'category': 'business',
        'sort_order': 13,
    },
    {
        'slug': 'health_insurance',
        'display_name': 'Health Insurance',
        'description': 'Policies, coverage and beneficiaries',
        'icon': 'heart-pulse',
        'category': 'health',
        'pricing_tier': 'premium',
        'sort_order': 20,
    },
    {
        'slug': 'claims',
        'display_name': 'Claims',
        'description': 'Claim intake, approval and reimbursement',
        'icon': 'file-check',
        'category': 'health',
        'pricing_tier': 'premium',
        'requires_modules': ['health_insurance'],
        'sort_order': 21,
    },
    {
        'slug': 'providers',
        'display_name': 'Providers',
        'description': 'Healthcare provider network',
        'icon': 'hospital',
        'category': 'health',
        'pricing_tier': 'premium',
        'requires_modules': ['health_insurance'],
        'sort_order': 22,
    },
    {
        'slug': 'crm',
        'display_name': 'CRM',
        'description': 'Leads, pipeline and follow-ups',
        'icon': 'contact',
        'category': 'communication',
        'pricing_tier': 'basic',
        'sort_order': 30,
    },
    {
        'slug': 'documents',
        'display_name': 'Documents',
        'description': 'Document storage and templates',
        'icon': 'folder',
        'category': 'communication',
        'sort_order': 31,
    },
    {
        'slug': 'reports',
        'display_name': 'Reports',
        'description': 'Standard reports and exports',
        'icon': 'file-text',
        'category': 'analytics',
        'sort_order': 40,
    },
    {
        'slug': 'analytics',
        'display_name': 'Analytics',
        'description': 'Dashboards and trend analysis',
        'icon': 'chart-bar',
        'category': 'analytics',
        'pricing_tier': 'enterprise',
        'requires_modules': ['reports'],
        'sort_order': 41,
    },
]
