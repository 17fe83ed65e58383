"""Transform factories and Markdown plugins for pickaxe."""
