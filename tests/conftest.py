import os

# pas d'écran en CI
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
