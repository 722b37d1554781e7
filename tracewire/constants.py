HTTP_CLIENT_OP = "http.client"
HTTP_BREADCRUMB_CATEGORY = "http"

REQUEST_BODY_SIZE_KEY = "request_body_size"
RESPONSE_BODY_SIZE_KEY = "response_body_size"

# Keys of the native objects attached as breadcrumb and event hints
REQUEST_HINT = "http_client:request"
RESPONSE_HINT = "http_client:response"

MECHANISM_TYPE = "HttpClientInterceptor"
HTTP_CLIENT_ERROR_MESSAGE = "HTTP Client Error with status code: %d"

COOKIE_HEADER = "Cookie"
SET_COOKIE_HEADER = "Set-Cookie"
