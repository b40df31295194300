import sys
import threading
import time

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from config.config import Config
from models.request_context import new_trace_id
from models.search_result import AnswerResult
from tools.web.factory import create_search_orchestrator_from_env, shutdown_shared_resources


def show_loading_animation(stop_event: threading.Event) -> None:
    """
    Show a loading animation in the console.

    Args:
        stop_event: A threading.Event that will be set to stop the animation
    """
    while not stop_event.is_set():
        for char in '|/-\\':
            if stop_event.is_set():
                break
            sys.stdout.write(f'\r\033[93mSearching {char}\033[0m')
            sys.stdout.flush()
            time.sleep(0.1)

    sys.stdout.write('\r' + ' ' * 20 + '\r')
    sys.stdout.flush()


def format_result(result: AnswerResult) -> str:
    """Render an answer followed by its numbered sources."""
    lines = [result.answer.strip(), ""]
    if result.sources:
        lines.append("Sources:")
        for source in result.sources:
            lines.append(f"  [{source.id}] {source.title}")
            lines.append(f"      {source.url}")
    return "\n".join(lines)


def main():
    config = Config()
    if not config.validate():
        print("Configuration is incomplete. Set SEARCH_API_KEY and the model API key in .env.")
        return

    try:
        orchestrator = create_search_orchestrator_from_env(config)
    except ValueError as e:
        print(f"Error initializing search pipeline: {e}")
        return

    print(f"\n=== AI Search ({config.get_model_info()}) ===")
    print("Type 'exit' to quit, 'stats' to see cache statistics, or 'help' for commands\n")

    try:
        while True:
            try:
                user_input = input("Query: ").strip()

                if not user_input:
                    continue

                if user_input.lower() in ('exit', 'quit'):
                    print("\nGoodbye!")
                    break

                if user_input.lower() == 'stats':
                    stats = orchestrator.cache.stats()
                    print(f"\nCache: {stats['hits']} hits, {stats['misses']} misses, {stats['size']} entries\n")
                    continue

                if user_input.lower() == 'help':
                    print("\n=== Available Commands ===")
                    print("help      - Show this help message")
                    print("stats     - Show result cache statistics")
                    print("exit/quit - Exit the program\n")
                    continue

                stop_animation = threading.Event()
                loading_thread = threading.Thread(target=show_loading_animation, args=(stop_animation,))
                loading_thread.daemon = True
                loading_thread.start()

                try:
                    result = orchestrator.search(user_input, trace_id=new_trace_id())
                finally:
                    stop_animation.set()
                    loading_thread.join()

                print(f"\n{format_result(result)}\n")

            except KeyboardInterrupt:
                print("\nExiting...")
                break
    finally:
        shutdown_shared_resources()


if __name__ == "__main__":
    main()
