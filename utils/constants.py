from decimal import Decimal

# Spree roles
ROLE_ADMIN = 'admin'
ROLE_USER = 'user'

ROLE_NAMES = [ROLE_ADMIN, ROLE_USER]

# Users whose email falls in this domain are guest checkouts, not registrations
ANONYMOUS_EMAIL_DOMAIN = '@example.net'

API_KEY_BYTES = 24

# Enterprise selling modes
SELLS_NONE = 'none'
SELLS_OWN = 'own'
SELLS_ANY = 'any'

SELLS_CHOICES = [
    (SELLS_NONE, 'None'),
    (SELLS_OWN, 'Own products'),
    (SELLS_ANY, 'Any products'),
]

# Tag rule outcomes
VISIBILITY_VISIBLE = 'visible'
VISIBILITY_HIDDEN = 'hidden'

VISIBILITY_CHOICES = [
    (VISIBILITY_VISIBLE, 'Visible'),
    (VISIBILITY_HIDDEN, 'Hidden'),
]

# Order states
ORDER_STATE_CART = 'cart'
ORDER_STATE_COMPLETE = 'complete'
ORDER_STATE_CANCELED = 'canceled'

ORDER_STATES = [
    (ORDER_STATE_CART, 'Cart'),
    (ORDER_STATE_COMPLETE, 'Complete'),
    (ORDER_STATE_CANCELED, 'Canceled'),
]

# Orders and fulfillments report types
REPORT_SUPPLIER_TOTALS = 'supplier_totals'
REPORT_SUPPLIER_TOTALS_BY_DISTRIBUTOR = 'supplier_totals_by_distributor'
REPORT_DISTRIBUTOR_TOTALS_BY_SUPPLIER = 'distributor_totals_by_supplier'
REPORT_CUSTOMER_TOTALS = 'customer_totals'

REPORT_TYPES = [
    (REPORT_SUPPLIER_TOTALS, 'Order Cycle Supplier Totals'),
    (REPORT_SUPPLIER_TOTALS_BY_DISTRIBUTOR, 'Order Cycle Supplier Totals by Distributor'),
    (REPORT_DISTRIBUTOR_TOTALS_BY_SUPPLIER, 'Order Cycle Distributor Totals by Supplier'),
    (REPORT_CUSTOMER_TOTALS, 'Order Cycle Customer Totals'),
]

EXPORT_FORMATS = [
    ('csv', 'CSV'),
    ('excel', 'Excel'),
    ('pdf', 'PDF'),
]

ZERO = Decimal('0.00')

# Autocomplete search limit for the admin users list
DEFAULT_USER_SEARCH_LIMIT = 100

DEFAULT_CURRENCY = 'AUD'

# Report export lifecycle
EXPORT_PENDING = 'pending'
EXPORT_PROCESSING = 'processing'
EXPORT_COMPLETED = 'completed'
EXPORT_FAILED = 'failed'

EXPORT_STATUSES = [
    (EXPORT_PENDING, 'Pending'),
    (EXPORT_PROCESSING, 'Processing'),
    (EXPORT_COMPLETED, 'Completed'),
    (EXPORT_FAILED, 'Failed'),
]

EXPORT_FILE_EXTENSIONS = {'csv': 'csv', 'excel': 'xlsx', 'pdf': 'pdf'}

EXPORT_CONTENT_TYPES = {
    'csv': 'text/csv',
    'excel': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'pdf': 'application/pdf',
}

EXPORT_RETENTION_DAYS = 7
