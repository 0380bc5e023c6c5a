"""Run the webcam mood companion.

Usage:
    uvicorn api.main:app --reload   # (separate, serves /api/classify, /api/joke, /api/quote)
    python scripts/companion.py     # (opens the camera preview window)

Keys: c = capture, r = try again, t = theme, y/n = feedback, q = quit.
"""
import argparse
import logging
from core.config import Settings
from core.companion import run_companion

def main():
    p = argparse.ArgumentParser()
    p.add_argument("--camera", type=int, default=None, help="Camera index (defaults to CAMERA_INDEX)")
    p.add_argument("--verbose", action="store_true")
    args = p.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    run_companion(Settings(), camera_index=args.camera)

if __name__ == '__main__':
    main()
