A_X = "http://a.x.calpoly.edu"
B_X = "http://b.x.calpoly.edu"
C_Y = "http://c.y.calpoly.edu"
D_Y = "http://d.y.calpoly.edu"

# Stationary distribution of the multi_domain_edges fixture for d = 0.9.
# By symmetry a = c and b = d:
#   b = 0.025 + 0.9 * a/2
#   a + b = 0.5          =>  a = 0.475 / 1.45
CLOSED_FORM_A = 0.475 / 1.45
CLOSED_FORM_B = 0.5 - CLOSED_FORM_A
