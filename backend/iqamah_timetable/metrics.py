# iqamah_timetable/metrics.py

from prometheus_client import Counter, Histogram

# Define Prometheus metrics

# Provider API Metrics
API_REQUESTS_TOTAL = Counter('iqamah_timetable_api_requests_total', 'Total prayer time provider requests', ['adapter_name', 'status'])
API_REQUEST_DURATION_SECONDS = Histogram('iqamah_timetable_api_request_duration_seconds', 'Provider request duration in seconds', ['adapter_name'])
PROVIDER_FALLBACKS_TOTAL = Counter('iqamah_timetable_provider_fallbacks_total', 'Times a fallback provider was tried', ['adapter_name'])

# Timetable Metrics
TIMETABLES_GENERATED_TOTAL = Counter('iqamah_timetable_generated_total', 'Total monthly timetables generated', ['display_policy'])
SCHEDULE_EDITS_TOTAL = Counter('iqamah_timetable_schedule_edits_total', 'Iqamah schedule edits', ['operation', 'status'])
