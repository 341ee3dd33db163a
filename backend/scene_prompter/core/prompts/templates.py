# Instruction templates sent to the generation service.
# Suggestions are requested in Indonesian, the language the narrative is composed in.

ACTION_SUGGESTION_TEMPLATE = (
    "Sarankan satu aksi singkat dan dinamis untuk karakter {name} yang berjenis {kind}. "
    "Contoh: berlari, melompat, berbicara. Output hanya aksinya saja dalam bahasa Indonesia."
)

DIALOGUE_CONTEXT = "Konteks umum: {location}, {time_of_day}."
NO_LOCATION = "tidak ada lokasi"
NO_TIME_OF_DAY = "tidak ada waktu"
DIALOGUE_OUTPUT_RULE = "Output hanya kalimat dialognya saja dalam bahasa Indonesia."

# Used when no more specific template applies (no resolved target)
DIALOGUE_GENERIC_TEMPLATE = "Sarankan kalimat dialog untuk karakter {speaker}. Jenis dialog: {kind_label}."
DIALOGUE_QUESTION_TEMPLATE = "Sarankan pertanyaan yang diajukan oleh {speaker} kepada {target}."
DIALOGUE_ANSWER_TEMPLATE = "Sarankan jawaban yang diberikan oleh {speaker} kepada {target}."
DIALOGUE_AUDIENCE_TEMPLATE = (
    "Sarankan kalimat yang diucapkan oleh {speaker} langsung ke kamera "
    "(seolah berbicara kepada penonton)."
)

REFINEMENT_TEMPLATE = """Optimize the following {source_language} animation prompt for {target_model}. Ensure the output is clean, polished, detailed, and follows a Veo-style structure. Write it in {target_language}. Keep any direct dialogue sentences (the text inside double quotes) exactly as written, in their original {source_language}.

{source_language} Prompt:
{prompt}

{target_model} Optimized {target_language} Prompt:"""
