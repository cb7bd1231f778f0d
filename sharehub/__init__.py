"""Sharehub: backend de compartilhamento de conteúdo."""
