#!/usr/bin/env python3
"""Print a development credential for a principal. Usage: mint_token.py <principal>"""
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from contactshare.infrastructure import mint_token

REPO_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(REPO_ROOT / ".env")
key = (os.environ.get("IDENTITY_TOKEN_KEY") or "").strip()
if not key:
    print("IDENTITY_TOKEN_KEY not set in .env", file=sys.stderr)
    sys.exit(1)
if len(sys.argv) != 2:
    print("Usage: mint_token.py <principal>", file=sys.stderr)
    sys.exit(1)

try:
    print(mint_token(key, sys.argv[1]))
except ValueError as e:
    print(f"Failed to mint token: {e}", file=sys.stderr)
    sys.exit(1)
