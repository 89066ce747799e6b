#!/usr/bin/env python3
"""
Toast watcher: prints the notifications the demo API pushes over its WebSocket
Run with: python watch_toasts.py [ws://localhost:3001/ws]
"""

import asyncio
import json
import os
import sys

import websockets


def format_message(message):
    """One console line for a message received from /ws"""
    kind = message.get("type", "message")
    if kind == "toast":
        return f"[{message['toast_type'].upper()}] {message['title']}: {message['message']}"
    text = message.get("message")
    return f"[{kind.upper()}] {text}" if text else f"[{kind.upper()}]"


async def watch(uri):
    try:
        print(f"🔗 Connecting to {uri}...")
        async with websockets.connect(uri) as websocket:
            print("✅ Connected, waiting for notifications (Ctrl+C to stop)")
            async for raw in websocket:
                try:
                    message = json.loads(raw)
                except json.JSONDecodeError:
                    print(f"📥 {raw}")
                    continue
                print(format_message(message))

    except websockets.exceptions.ConnectionClosed as e:
        print(f"❌ Connection closed: {e}")
    except websockets.exceptions.InvalidURI as e:
        print(f"❌ Invalid URI: {e}")
    except OSError as e:
        print(f"❌ Could not connect: {e}")


if __name__ == "__main__":
    default_uri = f"ws://localhost:{os.getenv('PORT', '3001')}/ws?client_id=toast-watcher"
    uri = sys.argv[1] if len(sys.argv) > 1 else default_uri
    try:
        asyncio.run(watch(uri))
    except KeyboardInterrupt:
        print("\n👋 Stopped")
