import os

# render surfaces without opening a window
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
