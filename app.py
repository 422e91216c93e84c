"""
Code Buddy - Web Application
Flask server behind the kid-friendly online code editor.
"""
from codebuddy.config import get_available_providers, get_default_provider, get_port, setup_logging
from codebuddy.server import create_app

setup_logging()
app = create_app()


if __name__ == '__main__':
    print("\n" + "="*50)
    print("  Code Buddy - Kid-Friendly Code Editor API")
    print("="*50)

    providers = get_available_providers()
    if not providers:
        print("\n⚠️  WARNING: No AI API keys configured!")
        print("   Set at least one in your .env file:")
        print("   GEMINI_API_KEY=your-gemini-key")
        print("   OPENAI_API_KEY=your-openai-key")
    else:
        print(f"\n✓ Default provider: {get_default_provider()}")
        print(f"✓ Available providers: {', '.join(providers)}")

    port = get_port()
    print(f"\n🚀 Starting server at http://localhost:{port}")
    print("="*50 + "\n")

    app.run(debug=False, host='0.0.0.0', port=port)
