"""
Run the caption studio with the Waitress WSGI server
Listens on all interfaces at the port configured by PORT
"""
from waitress import serve
from main import app, settings

if __name__ == '__main__':
    print("\n" + "="*70)
    print(f"Starting Brand Caption Studio with Waitress on port {settings.port}")
    print("="*70 + "\n")

    serve(app, host='0.0.0.0', port=settings.port, threads=settings.server_threads)
