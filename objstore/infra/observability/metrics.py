from prometheus_client import Counter, Histogram

# 低基数标签：只使用后端名与 HTTP 方法，不带对象 key
REQUESTS = Counter(
    "object_storage_requests_total",
    "Total object storage requests",
    ["backend", "method", "status"],
)

LATENCY = Histogram(
    "object_storage_request_duration_seconds",
    "Object storage request latency in seconds",
    ["backend", "method"],
)
