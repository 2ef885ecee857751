"""채널 API 설정 AES-256-GCM 암호화/복호화

암호문 형식: ivHex:authTagHex:cipherHex
"""
import json
import os
from typing import Dict, Mapping, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from channel_sync.core.exceptions import ConfigurationError, DecryptionError
from channel_sync.shared.config import get_settings

IV_LENGTH = 16
TAG_LENGTH = 16


def _load_key(key_hex: Optional[str] = None) -> bytes:
    """hex 키(32바이트) 로드"""
    key_hex = key_hex or get_settings().channel_secret_key
    if not key_hex:
        raise ConfigurationError("[보안 오류] CHANNEL_SECRET_KEY 환경변수가 설정되지 않았습니다.")
    try:
        key = bytes.fromhex(key_hex)
    except ValueError as e:
        raise ConfigurationError("[보안 오류] CHANNEL_SECRET_KEY 는 hex 문자열이어야 합니다.") from e
    if len(key) != 32:
        raise ConfigurationError(f"[보안 오류] 암호화 키 길이가 잘못되었습니다: {len(key)}바이트 (32바이트 필요)")
    return key


def encrypt_text(plaintext: str, key_hex: Optional[str] = None) -> str:
    """평문 암호화"""
    key = _load_key(key_hex)
    iv = os.urandom(IV_LENGTH)
    sealed = AESGCM(key).encrypt(iv, plaintext.encode("utf-8"), None)
    ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
    return f"{iv.hex()}:{tag.hex()}:{ciphertext.hex()}"


def decrypt_text(blob: str, key_hex: Optional[str] = None) -> str:
    """암호문 복호화"""
    key = _load_key(key_hex)
    parts = (blob or "").split(":")
    if len(parts) != 3:
        raise DecryptionError("[복호화 오류] 잘못된 암호문 형식입니다.")

    try:
        iv, tag, ciphertext = (bytes.fromhex(part) for part in parts)
    except ValueError as e:
        raise DecryptionError("[복호화 오류] 암호문이 hex 형식이 아닙니다.") from e

    try:
        plaintext = AESGCM(key).decrypt(iv, ciphertext + tag, None)
    except (InvalidTag, ValueError) as e:
        raise DecryptionError("[복호화 오류] 인증 태그가 일치하지 않습니다. 키 또는 암호문을 확인해 주세요.") from e

    return plaintext.decode("utf-8")


def decrypt_config(blob: str, key_hex: Optional[str] = None) -> Dict[str, str]:
    """암호화된 채널 설정을 평탄한 문자열 맵으로 변환"""
    try:
        parsed = json.loads(decrypt_text(blob, key_hex))
    except json.JSONDecodeError as e:
        raise DecryptionError("[복호화 오류] 채널 설정이 JSON 형식이 아닙니다.") from e

    if not isinstance(parsed, dict):
        raise DecryptionError("[복호화 오류] 채널 설정은 JSON 객체여야 합니다.")

    return {
        str(k): v if isinstance(v, str) else json.dumps(v) if isinstance(v, (dict, list)) else str(v)
        for k, v in parsed.items()
        if v is not None
    }


def encrypt_config(config: Mapping[str, str], key_hex: Optional[str] = None) -> str:
    """채널 설정 맵 암호화"""
    return encrypt_text(json.dumps(dict(config), ensure_ascii=False), key_hex)
