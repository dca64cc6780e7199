from shellmate.cli import entrypoint

entrypoint()
