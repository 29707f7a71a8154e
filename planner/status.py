"""HTTP status codes used by the planner controllers."""

HTTP_200_OK = 200
HTTP_303_SEE_OTHER = 303
HTTP_400_BAD_REQUEST = 400
HTTP_401_UNAUTHORIZED = 401
HTTP_403_FORBIDDEN = 403
HTTP_404_NOT_FOUND = 404
HTTP_502_BAD_GATEWAY = 502
