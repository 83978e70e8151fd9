# LexRelay: prompt-assembly relay between the legal assistant UI and an upstream LLM.
