from __future__ import annotations
import streamlit as st
import re
import logging
import pandas as pd
import numpy as np
import matplotlib.pyplot as plt
import networkx as nx
import io

from text_ranker.datatypes import RankConfig
from text_ranker.preprocessing import PreprocessConfig, preprocess_text, keyword_tokens
from text_ranker.graphing import build_keyword_graph, build_sentence_graph, to_networkx
from text_ranker.scoring import RankSolver
from text_ranker.selection import rank_order, select, in_document_order

logger = logging.getLogger(__name__)

def extract_rtf_text(rtf_content):
    """Extract plain text from RTF content."""
    # Remove RTF control words and groups
    text = re.sub(r'\\[a-z]+\d*', '', rtf_content)
    text = re.sub(r'[{}]', '', text)
    text = re.sub(r'\\\*.*?;', '', text)
    text = re.sub(r'\\[^a-z]', '', text)
    text = re.sub(r'\s+', ' ', text)
    return text.strip()

def extract_markdown_text(md_content):
    """Extract plain text from Markdown content."""
    text = re.sub(r'^#{1,6}\s+', '', md_content, flags=re.MULTILINE)
    text = re.sub(r'\*{1,2}(.*?)\*{1,2}', r'\1', text)
    text = re.sub(r'_{1,2}(.*?)_{1,2}', r'\1', text)
    text = re.sub(r'\[([^\]]+)\]\([^)]+\)', r'\1', text)
    text = re.sub(r'```.*?```', '', text, flags=re.DOTALL)
    text = re.sub(r'`([^`]+)`', r'\1', text)
    text = re.sub(r'^-{3,}$', '', text, flags=re.MULTILINE)
    text = re.sub(r'\n\s*\n', '\n\n', text)
    return text.strip()

def load_text_from_file(uploaded_file):
    """Load text content from uploaded file based on file type."""
    file_extension = uploaded_file.name.lower().split('.')[-1]
    content = uploaded_file.read().decode("utf-8")

    if file_extension == 'rtf':
        return extract_rtf_text(content)
    elif file_extension == 'md':
        return extract_markdown_text(content)
    else:  # txt and other formats
        return content

def preview(text: str, width: int = 80) -> str:
    return text[:width] + "..." if len(text) > width else text

def draw_sentence_graph(graph, scores, labels):
    """Draw the sentence graph; node size follows rank score, edge width follows weight."""
    G = to_networkx(graph, label=lambda s: labels[s])
    fig, ax = plt.subplots(figsize=(10, 8))
    ax.set_title("Sentence Graph (node size = score)", fontsize=14, fontweight='bold')

    if len(G.nodes) > 0:
        pos = nx.spring_layout(G.to_undirected(), k=2, iterations=50, seed=42)
        by_label = {labels[s]: v for s, v in scores.items()}
        values = np.array([by_label.get(n, 0.0) for n in G.nodes()])
        top = values.max() if values.size and values.max() > 0 else 1.0
        nx.draw_networkx_nodes(G, pos, ax=ax,
                               node_color=values, cmap=plt.cm.Blues,
                               node_size=300 + 1200 * (values / top),
                               alpha=0.8)

        weights = np.array([d['weight'] for _, _, d in G.edges(data=True)])
        if weights.size and weights.max() > 0:
            nx.draw_networkx_edges(G.to_undirected(), pos, ax=ax,
                                   width=list(3 * weights / weights.max()),
                                   alpha=0.5,
                                   edge_color='gray')
        nx.draw_networkx_labels(G, pos, ax=ax, font_size=10, font_weight='bold')

    ax.set_aspect('equal')
    ax.axis('off')
    plt.tight_layout()

    buf = io.BytesIO()
    plt.savefig(buf, format='png', dpi=150, bbox_inches='tight')
    buf.seek(0)
    plt.close()
    return buf

def create_sidebar_controls():
    """Create sidebar controls for parameters."""
    st.sidebar.header("Ranking")
    damping = st.sidebar.slider("Damping factor", min_value=0.05, max_value=0.95, value=0.85, step=0.05)
    threshold = st.sidebar.number_input("Convergence threshold", min_value=1e-6, max_value=1.0,
                                        value=0.01, format="%.6f")
    min_iter, max_iter = st.sidebar.slider("Iterations (min, max)", min_value=0, max_value=500,
                                           value=(10, 100))
    window = st.sidebar.slider("Keyword window", min_value=1, max_value=10, value=3,
                               help="Tokens on each side that count as co-occurring")

    st.sidebar.header("Selection")
    mode = st.sidebar.radio("Truncate by", ["count", "compression", "none"])
    count = compression = None
    if mode == "count":
        count = st.sidebar.number_input("Count", min_value=0, value=5, step=1)
    elif mode == "compression":
        compression = st.sidebar.slider("Compression ratio", min_value=0.0, max_value=1.0,
                                        value=0.8, step=0.05, help="Fraction of items to drop")

    st.sidebar.header("Debug Options")
    debug_mode = st.sidebar.checkbox("Enable Debug Mode", value=False, help="Show graph and solver details")

    config = RankConfig(damping_factor=damping, convergence_threshold=threshold,
                        max_iterations=max(1, max_iter), min_iterations=min_iter)
    return config, window, count, compression, debug_mode

def show_keywords(text: str, config: RankConfig, window: int, count, compression, debug_mode: bool):
    st.header("Keywords")
    tokens = keyword_tokens(text, PreprocessConfig())
    graph = build_keyword_graph(tokens, config, window=window)
    solver = RankSolver(graph, config)
    ranked = rank_order(solver.solve(), tokens)
    selected = select(ranked, count=count, compression=compression)

    df = pd.DataFrame([{"Rank": i + 1, "Keyword": w, "Score": f"{s:.4f}"}
                       for i, (w, s) in enumerate(selected)])
    st.dataframe(df, use_container_width=True)

    if debug_mode:
        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Tokens", len(tokens))
        with col2:
            st.metric("Vertices", len(graph))
        with col3:
            st.metric("Edges", graph.edge_count)
        with col4:
            st.metric("Passes", f"{solver.iterations} ({'converged' if solver.converged else 'capped'})")

def show_summary(text: str, config: RankConfig, count, compression, debug_mode: bool):
    st.header("Summary")
    doc = preprocess_text(text, cfg=PreprocessConfig())
    graph = build_sentence_graph(doc.sentences, config)
    solver = RankSolver(graph, config)
    scores = solver.solve()
    ranked = rank_order(scores, doc.sentences)
    selected = select(ranked, count=count, compression=compression)

    ordered = in_document_order([s for s, _ in selected], doc.sentences)
    st.text_area("Selected sentences (document order)", " ".join(s.text for s in ordered),
                 height=150, disabled=True)

    index = {s: i for i, s in enumerate(doc.sentences)}
    df = pd.DataFrame([{"Rank": r + 1, "Sentence #": index[s] + 1, "Score": f"{v:.4f}",
                        "Text": preview(s.text)} for r, (s, v) in enumerate(selected)])
    st.dataframe(df, use_container_width=True)

    if debug_mode:
        with st.expander("Graph Details", expanded=True):
            col1, col2, col3 = st.columns(3)
            with col1:
                st.metric("Sentences", len(doc.sentences))
            with col2:
                st.metric("Edges", graph.edge_count)
            with col3:
                st.metric("Passes", solver.iterations)

            labels = {s: f"S{i+1}" for i, s in enumerate(doc.sentences)}
            edges_df = pd.DataFrame([{"From": labels[a], "To": labels[b], "Weight": f"{w:.3f}"}
                                     for a, b, w in graph.edges()])
            st.dataframe(edges_df, use_container_width=True, height=200)

            if len(graph) <= 50:
                try:
                    image = draw_sentence_graph(graph, scores, labels)
                    st.image(image, caption="Sentence graph", use_column_width=True)
                except Exception as e:
                    logger.exception("graph drawing failed")
                    st.error(f"Could not generate graph visualization: {str(e)}")
            else:
                st.info(f"Graph too large to visualize ({len(graph)} nodes).")

def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    st.title("TextRank Keywords & Summary")
    st.write("Upload a text file to rank its keywords and sentences")

    config, window, count, compression, debug_mode = create_sidebar_controls()
    logging.getLogger("text_ranker").setLevel(logging.DEBUG if debug_mode else logging.INFO)

    uploaded_file = st.file_uploader(
        "Choose a text file",
        type=['txt', 'rtf', 'md'],
        help="Upload a text file (supports .txt, .rtf, .md formats)"
    )

    if uploaded_file is not None:
        text = load_text_from_file(uploaded_file)
        st.subheader("Original Text")
        st.text_area("Content", text, height=200, disabled=True)

        if st.button("Rank", type="primary"):
            try:
                with st.spinner("Ranking..."):
                    show_keywords(text, config, window, count, compression, debug_mode)
                    show_summary(text, config, count, compression, debug_mode)
            except Exception as e:
                st.error(f"Error ranking text: {str(e)}")
                st.exception(e)

if __name__ == "__main__":
    main()
