import random
from typing import Dict, Optional

import requests

from x_follower_report import settings

X_USER_URL = "https://api.twitter.com/2/users/by/username/{username}"


class XApiError(RuntimeError):
    pass


def get_user_metrics(
    user_name: str,
    api_key: str,
    test_mode: bool = False,
    timeout: Optional[int] = None,
) -> Dict[str, int]:
    """계정의 팔로워 수 / 팔로잉 수를 가져온다. test_mode면 API 호출 없이 난수."""
    if test_mode:
        return {
            "followers": random.randint(0, 9999),
            "following": random.randint(0, 999),
        }

    url = X_USER_URL.format(username=user_name)
    headers = {"Authorization": f"Bearer {api_key}"}
    r = requests.get(
        url,
        headers=headers,
        params={"user.fields": "public_metrics"},
        timeout=timeout or settings.X_API_TIMEOUT,
    )
    try:
        data = r.json()
    except ValueError as exc:
        raise XApiError(
            f"{user_name} 응답 파싱 실패 status={r.status_code} body={r.text[:200]}"
        ) from exc

    if not isinstance(data, dict):
        raise XApiError(f"{user_name} 응답 형식 오류: {str(data)[:200]}")
    if data.get("errors"):
        raise XApiError(f"{user_name} 데이터 조회 실패: {data['errors']}")
    metrics = (data.get("data") or {}).get("public_metrics")
    if not metrics:
        raise XApiError(f"{user_name} public_metrics 없음 status={r.status_code}")

    return {
        "followers": metrics["followers_count"],
        "following": metrics["following_count"],
    }
