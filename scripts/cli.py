"""
CLI to analyze a still image -> JSON mood estimate (+ optional suggestion).
"""
from __future__ import annotations
import argparse, asyncio, json, logging
from core.config import Settings
from core.pipeline import analyze_image_pipeline
from core.remote import RemoteClassifier
from core.suggestions import SuggestionProvider, title_for_emotion

def main():
    p = argparse.ArgumentParser()
    p.add_argument("--image", required=True, help="Path to input image")
    p.add_argument("--out", default="output/mood.json", help="Path to output JSON")
    p.add_argument("--remote", action="store_true", help="Ask /api/classify when the local answer stays neutral")
    p.add_argument("--suggest", action="store_true", help="Fetch a suggestion from the running API")
    p.add_argument("--verbose", action="store_true")
    args = p.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    settings = Settings()
    remote = RemoteClassifier(settings) if args.remote else None
    result = analyze_image_pipeline(args.image, settings, remote=remote)
    result["title"] = title_for_emotion(result["emotion"])
    if args.suggest:
        result["suggestion"] = asyncio.run(SuggestionProvider(settings).suggest(result["emotion"]))
    print(json.dumps(result, indent=2, ensure_ascii=False))

    # Also write to file
    import os
    os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
    with open(args.out, "w", encoding="utf-8") as f:
        json.dump(result, f, indent=2, ensure_ascii=False)
    print(f"✅ Mood written to {args.out}")

if __name__ == "__main__":
    main()
