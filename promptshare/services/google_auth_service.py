# promptshare/services/google_auth_service.py

import logging
from typing import Optional

import requests
from google_auth_oauthlib.flow import Flow

class GoogleAuthService:
    """
    외부 ID 제공자(Google OAuth 2.0)와의 통신을 담당합니다.
    인증 코드를 교환해 확인된 사용자 정보(email, name, picture)만 돌려줍니다.
    """
    _user_info_url = "https://www.googleapis.com/oauth2/v3/userinfo"
    _scopes = [
        "https://www.googleapis.com/auth/userinfo.profile",
        "https://www.googleapis.com/auth/userinfo.email",
        "openid"
    ]

    @staticmethod
    def exchange_code_for_user_info(auth_code: str, client_secrets_path: str,
                                    redirect_uri: str = "postmessage") -> Optional[dict]:
        """
        인증 코드를 Access Token으로 교환하고, 이를 사용해 사용자 정보를 가져옵니다.
        실패하면 None 을 반환합니다.
        """
        try:
            flow = Flow.from_client_secrets_file(client_secrets_path, scopes=GoogleAuthService._scopes)
            flow.redirect_uri = redirect_uri

            # 인증 코드를 토큰으로 교환
            flow.fetch_token(code=auth_code)
            credentials = flow.credentials

            response = requests.get(
                GoogleAuthService._user_info_url,
                headers={"Authorization": f"Bearer {credentials.token}"},
                timeout=10
            )
            response.raise_for_status()
            return response.json()

        except Exception as e:
            logging.error(f"Google OAuth failed: {e}", exc_info=True)
            return None
