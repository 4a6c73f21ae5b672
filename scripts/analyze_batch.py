#!/usr/bin/env python3
import argparse, json, sys
from text_analytics.client import analyze
from text_analytics.errors import TextAnalyticsError
from text_analytics.schemas import Operation

def load_documents(fh) -> list:
    raw = fh.read()
    s = raw.strip()
    if not s:
        return []
    if s.startswith('['):
        return json.loads(s)
    # JSONL: one document per line
    return [json.loads(line) for line in s.splitlines() if line.strip()]

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description='Send a batch of documents to Text Analytics and print the JSON reply.')
    ap.add_argument('--op', required=True, choices=[o.value for o in Operation])
    ap.add_argument('--input', default='-', help='JSON array or JSONL file of documents; - for stdin')
    ap.add_argument('--key', default='', help='API key (falls back to TEXT_ANALYTICS_SUBSCRIPTION_KEY)')
    ap.add_argument('--endpoint', default='', help='resource name (falls back to TEXT_ANALYTICS_ENDPOINT)')
    args = ap.parse_args(argv)

    try:
        if args.input == '-':
            docs = load_documents(sys.stdin)
        else:
            with open(args.input, 'r', encoding='utf-8') as f:
                docs = load_documents(f)
    except (OSError, ValueError) as e:
        print(f'invalid_input: {e}', file=sys.stderr)
        return 1

    try:
        out = analyze(args.key, args.endpoint, args.op, docs)
    except TextAnalyticsError as e:
        print(f'{e.code}: {e}', file=sys.stderr)
        return 1
    print(out)
    return 0

if __name__ == '__main__':
    sys.exit(main())
