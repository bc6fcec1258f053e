# Explanation cards for the analyses the dashboard runs on the employee dataset.

ANALYSIS_DETAILS = {
    "📋 Descriptive statistics": {
        "title": "📋 Descriptive Statistics: Summarising One Column",
        "description": "A handful of numbers that describe where a numeric column is centred, how spread out it is, and whether it leans to one side.",
        "when_to_use": [
            "You want a quick feel for a <strong>single numeric variable</strong> (e.g., salary or weekly hours).",
            "You are comparing the shape of the same variable across <strong>departments</strong>.",
            "You need to spot a <strong>skewed</strong> column before running a test that assumes a bell curve."
        ],
        "key_assumptions": [
            "The column is <strong>numeric</strong>.",
            "There is at least one value (min and max are undefined for an empty selection)."
        ],
        "basic_idea": "The <strong>mean</strong> and <strong>median</strong> describe the centre, the <strong>standard deviation</strong> the typical distance from the mean, and <strong>skewness</strong> whether the long tail is on the right (positive) or the left (negative).",
        "formula_simple": "Standard deviation uses the sample formula: <br>$s = \\sqrt{\\frac{\\sum (x_i - \\bar{x})^2}{n - 1}}$ <br><br>Skewness is the adjusted Fisher-Pearson coefficient: <br>$G = \\frac{n}{(n-1)(n-2)} \\sum \\left(\\frac{x_i - \\bar{x}}{s}\\right)^3$",
        "example": "If the median salary is well below the mean and skewness is positive, a few very high earners are pulling the average up.",
        "interpretation": "Skewness near 0 means roughly symmetric. Values beyond about ±1 suggest a clearly lopsided distribution. A standard deviation of 0 means every value is identical."
    },
    "🔗 Correlation": {
        "title": "🔗 Pearson Correlation: How Two Columns Move Together",
        "description": "A single number between -1 and 1 that says how strongly two numeric variables follow a straight-line relationship.",
        "when_to_use": [
            "You have <strong>two numeric variables</strong> measured on the same employees.",
            "You want to know whether they tend to rise together, move in opposite directions, or are unrelated."
        ],
        "key_assumptions": [
            "Both variables are <strong>continuous</strong>.",
            "The relationship is roughly <strong>linear</strong>.",
            "Neither variable is constant (a constant column is reported as 0)."
        ],
        "basic_idea": "It compares how far each point is from both averages at the same time. When points above average on one variable are usually above average on the other, the correlation is positive.",
        "formula_simple": "$r = \\frac{\\sum (x_i - \\bar{x})(y_i - \\bar{y})}{\\sqrt{\\sum (x_i - \\bar{x})^2 \\sum (y_i - \\bar{y})^2}}$",
        "example": "Years of experience and salary are strongly positively correlated in this dataset, because salary is built from experience plus noise.",
        "interpretation": "Close to 1: strong positive relationship. Close to -1: strong negative relationship. Close to 0: no linear relationship (there may still be a curved one)."
    },
    "🧑‍🔬 Independent t-test": {
        "title": "🧑‍🔬 Independent t-Test: Comparing Two Departments",
        "description": "Checks whether the average of a numeric variable differs between two separate departments by more than random variation would explain.",
        "when_to_use": [
            "You have <strong>two independent groups</strong> (e.g., Engineering vs Sales).",
            "You are comparing the <strong>average</strong> of one numeric measurement between them."
        ],
        "key_assumptions": [
            "The groups are <strong>independent</strong>.",
            "Each group is roughly <strong>normally distributed</strong>.",
            "<strong>Equal variances</strong> (the spreads are pooled into one estimate)."
        ],
        "basic_idea": "The t-statistic is the difference between the two averages divided by its standard error. The further it is from 0, the less likely the difference is just noise.",
        "formula_simple": "$s_p^2 = \\frac{(n_1-1)s_1^2 + (n_2-1)s_2^2}{n_1+n_2-2}$ <br>$t = \\frac{\\bar{x}_1 - \\bar{x}_2}{\\sqrt{s_p^2 (1/n_1 + 1/n_2)}}$",
        "example": "Comparing the average salary of Engineering and Sales: Engineering has a higher base salary, so the test is usually significant.",
        "interpretation": "The dashboard flags a result as significant when |t| > 1.96, the usual cut-off at the 0.05 level for large samples. The reported p-value is only a rough label (about 0.04 when significant, about 0.20 otherwise), not an exact probability."
    },
    "📈 Linear regression": {
        "title": "📈 Simple Linear Regression: Drawing the Best Straight Line",
        "description": "Fits the straight line that best predicts one numeric variable from another, and reports how much of the variation that line explains.",
        "when_to_use": [
            "You want to <strong>predict</strong> one variable (e.g., salary) from another (e.g., years of experience).",
            "You want to know <strong>how much</strong> the outcome changes per unit of the predictor."
        ],
        "key_assumptions": [
            "The relationship is approximately <strong>linear</strong>.",
            "The predictor is <strong>not constant</strong>; a constant predictor has no defined slope.",
            "Residuals are independent with roughly constant spread."
        ],
        "basic_idea": "Ordinary least squares picks the slope and intercept that make the squared vertical distances from the points to the line as small as possible.",
        "formula_simple": "$slope = \\frac{\\sum (x_i - \\bar{x})(y_i - \\bar{y})}{\\sum (x_i - \\bar{x})^2}$, $intercept = \\bar{y} - slope \\cdot \\bar{x}$, $R^2 = r^2$",
        "example": "Regressing salary on years of experience gives a slope close to 5000: each extra year adds about $5,000.",
        "interpretation": "The <strong>slope</strong> is the change in the outcome per unit of the predictor. <strong>R²</strong> runs from 0 to 1; 0.7 means the line explains 70% of the variation in the outcome."
    },
}


def find_analysis(name: str):
    """Looks up a card by its full key or by the key without the emoji, case-insensitively."""
    query = str(name or '').strip().lower()
    for key, details in ANALYSIS_DETAILS.items():
        plain = key.split(' ', 1)[1].lower() if ' ' in key else key.lower()
        if query in (key.lower(), plain):
            return details
    return None


def render_analysis_html(details) -> str:
    html = f"<h3>{details['title']}</h3>"
    html += f"<p>{details['description']}</p><br>"

    html += "<strong>When to use this:</strong><ul>"
    for item in details['when_to_use']: html += f"<li>{item}</li>"
    html += "</ul><br>"

    html += "<strong>Key Assumptions (things to check for):</strong><ul>"
    for item in details['key_assumptions']: html += f"<li>{item}</li>"
    html += "</ul><br>"

    html += f"<strong>Basic Idea:</strong><p>{details['basic_idea']}</p><br>"
    if details.get('formula_simple'):
        html += f"<strong>Simplified Formula:</strong><p>{details['formula_simple']}</p><br>"
    html += f"<strong>Example:</strong><p>{details['example']}</p><br>"
    html += f"<strong>Interpreting Results (Simplified):</strong><p>{details['interpretation']}</p>"
    return html
