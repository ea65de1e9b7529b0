"""Internal constants shared across the library."""

BASE_URL = "https://api.weixin.qq.com"
USER_AGENT = "pyminapp (+aiohttp)"

TOKEN_ENDPOINT = "/cgi-bin/token"
STABLE_TOKEN_ENDPOINT = "/cgi-bin/stable_token"
CODE2SESSION_ENDPOINT = "/sns/jscode2session"
CHECK_SESSION_ENDPOINT = "/wxa/checksession"
RESET_SESSION_KEY_ENDPOINT = "/wxa/resetusersessionkey"
PHONE_NUMBER_ENDPOINT = "/wxa/business/getuserphonenumber"
UNLIMITED_QRCODE_ENDPOINT = "/wxa/getwxacodeunlimit"
SHORT_LINK_ENDPOINT = "/wxa/genwxashortlink"
MSG_SEC_CHECK_ENDPOINT = "/wxa/msg_sec_check"

# ------------------------------------------------------------------
# Platform errcode classification
# ------------------------------------------------------------------

#: "System busy, please retry" - the only transient application code.
SYSTEM_BUSY_CODE = -1

#: Session key signature rejected by checksession / resetusersessionkey.
INVALID_SIGNATURE_CODE = 87009

ACCESS_TOKEN_EXPIRED_CODES: frozenset[int] = frozenset({40001, 40014, 42001})

AUTH_ERROR_CODES: frozenset[int] = frozenset(
    {
        40002,  # invalid grant_type
        40013,  # invalid appid
        40029,  # invalid js_code
        40125,  # invalid appsecret
        40163,  # js_code already used
        40164,  # caller ip not in whitelist
        40226,  # high-risk user, login blocked
        41002,  # appid missing
        41004,  # appsecret missing
        INVALID_SIGNATURE_CODE,
    }
)

RATE_LIMIT_CODES: frozenset[int] = frozenset(
    {
        45009,  # daily api quota reached
        45011,  # api minute-quota reached
        45033,  # stable_token force_refresh limit reached
    }
)

#: HTTP statuses that signal a transient server-side failure.
RETRYABLE_HTTP_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

#: Default safety margin (seconds) before actual token expiry.
DEFAULT_TOKEN_REFRESH_MARGIN: float = 5 * 60
